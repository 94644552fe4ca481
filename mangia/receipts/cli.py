"""CLI entry point for receipt scanning."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .camera import ReceiptCamera
from .config import load_config
from .db import PantryDB
from .errors import ReceiptScanError
from .models import ReceiptDocument, ReceiptLineItem
from .parser import parse_receipt_text
from .reconcile import reconcile_with_pantry
from .scanner import ReceiptScanner, load_image
from .sources import create_source

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="mangia-receipts",
        description="Scan grocery receipts and match the items against your pantry",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # cameras
    sub.add_parser("cameras", help="List available cameras")

    # pantry
    sub.add_parser("pantry", help="List pantry records")

    # history
    sub.add_parser("history", help="List receipts saved to the pantry")

    # scan
    scan_parser = sub.add_parser("scan", help="Photograph or load a receipt and extract items")
    scan_parser.add_argument("--image", type=str, help="Use an existing image file")
    scan_parser.add_argument(
        "--source", type=str, default=None,
        help="Extraction source (tesseract / veryfi / claude / gemini / mock)",
    )
    scan_parser.add_argument("--json", action="store_true", help="Print JSON")
    scan_parser.add_argument(
        "--save", action="store_true", help="Add the items to the pantry database"
    )

    # parse
    parse_parser = sub.add_parser("parse", help="Parse a saved OCR text dump")
    parse_parser.add_argument("file", type=str, help="Text file, or - for stdin")
    parse_parser.add_argument("--json", action="store_true", help="Print JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    load_dotenv()
    config = load_config(args.config)

    match args.command:
        case "cameras":
            _cmd_cameras()
        case "pantry":
            _cmd_pantry(config)
        case "history":
            _cmd_history(config)
        case "scan":
            if asyncio.run(_cmd_scan(config, args)):
                sys.exit(1)
        case "parse":
            _cmd_parse(config, args)


def _cmd_cameras() -> None:
    cameras = ReceiptCamera.list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  camera {idx}")


def _cmd_pantry(config) -> None:
    db = PantryDB(config.database.path)
    try:
        records = db.list_records()
    finally:
        db.close()

    if not records:
        print("The pantry is empty.")
        return
    print(f"Pantry ({len(records)} items):")
    for record in records:
        print(f"  #{record.id:<5} {record.name}")


def _cmd_history(config) -> None:
    db = PantryDB(config.database.path)
    try:
        scans = db.list_scans()
    finally:
        db.close()

    if not scans:
        print("No receipts have been saved yet.")
        return
    for scan in scans:
        vendor = scan["vendor"] or "-"
        total = scan["total"] or "-"
        print(
            f"  {scan['applied_at']}  {vendor:<24} {total:>8}  "
            f"{scan['item_count']} items ({scan['matched_count']} matched)"
        )


async def _cmd_scan(config, args) -> int:
    try:
        if args.image:
            image = load_image(args.image)
        else:
            camera = ReceiptCamera(
                camera_index=config.camera.index,
                save_dir=config.camera.save_dir,
                warmup_frames=config.camera.warmup_frames,
                jpeg_quality=config.camera.jpeg_quality,
            )
            print("📷 Capturing receipt...", file=sys.stderr)
            image = camera.capture()
    except ReceiptScanError as e:
        logger.debug("Acquisition failed: %s", e)
        print(e.user_message, file=sys.stderr)
        return 1

    source = create_source(config, args.source)
    db = PantryDB(config.database.path)
    try:
        scanner = ReceiptScanner(source, pantry_db=db)
        print(f"🔍 Reading receipt with {source.name}...", file=sys.stderr)
        try:
            document = await scanner.scan(image)
        except ReceiptScanError as e:
            print(e.user_message, file=sys.stderr)
            return 1

        if args.json:
            print(json.dumps(_document_to_dict(document), ensure_ascii=False, indent=2))
        else:
            _print_document(document)

        if args.save and document.items:
            updated, created = db.apply_receipt(document)
            print(f"💾 Pantry updated: {updated} updated, {created} added", file=sys.stderr)
    finally:
        db.close()
    return 0


def _cmd_parse(config, args) -> None:
    if args.file == "-":
        text = sys.stdin.read()
    else:
        text = Path(args.file).read_text(encoding="utf-8", errors="replace")

    db = PantryDB(config.database.path)
    try:
        items = reconcile_with_pantry(parse_receipt_text(text), db.list_records())
    finally:
        db.close()

    document = ReceiptDocument(items=tuple(items), raw_text=text, source="text")
    if args.json:
        print(json.dumps(_document_to_dict(document), ensure_ascii=False, indent=2))
    else:
        _print_document(document)


def _money(value) -> str | None:
    return str(value) if value is not None else None


def _item_to_dict(item: ReceiptLineItem) -> dict:
    return {
        "name": item.name,
        "quantity": item.quantity,
        "price": _money(item.price),
        "total": _money(item.total),
        "inventory_id": item.inventory_id,
    }


def _document_to_dict(document: ReceiptDocument) -> dict:
    return {
        "source": document.source,
        "document_id": document.document_id,
        "vendor": {
            "name": document.vendor_name,
            "address": document.vendor_address,
        },
        "date": document.date,
        "subtotal": _money(document.subtotal),
        "tax": _money(document.tax),
        "total": _money(document.total),
        "items": [_item_to_dict(i) for i in document.items],
    }


def _print_document(document: ReceiptDocument) -> None:
    if not document.items:
        print("No items were recognized on this receipt.")
        return

    header = document.vendor_name
    if document.date:
        header += f" ({document.date})"
    print(f"\n🧾 {header}: {len(document.items)} items")
    for item in document.items:
        price = f"{item.price:>8}" if item.price is not None else "       -"
        status = f"[pantry #{item.inventory_id}]" if item.inventory_id is not None else "[new]"
        print(f"  {item.quantity:>3} x {item.name:<30} {price}  {status}")
    if document.total is not None:
        print(f"  {'total':>36} {document.total:>8}")
