"""Receipt photos from a USB camera, encoded with OpenCV."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from .errors import AcquisitionFailure
from .models import ReceiptImage

logger = logging.getLogger(__name__)


def _require_cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install 'mangia-receipts[camera]'"
        ) from None
    return cv2


class ReceiptCamera:
    """Photograph a receipt held in front of a USB camera.

    The first ``warmup_frames`` frames are dropped while auto exposure
    settles. Each photo is JPEG encoded in memory; when ``save_dir`` is set
    a copy is also kept on disk.
    """

    def __init__(
        self,
        camera_index: int = 0,
        save_dir: str | None = "/tmp/receipts",
        warmup_frames: int = 5,
        jpeg_quality: int = 90,
    ) -> None:
        self._camera_index = camera_index
        self._save_dir = Path(save_dir).expanduser() if save_dir else None
        self._warmup_frames = max(0, warmup_frames)
        self._jpeg_quality = jpeg_quality

    def capture(self) -> ReceiptImage:
        """Take one photo and return it as a JPEG ``ReceiptImage``.

        Raises:
            AcquisitionFailure: If the camera cannot be opened, read or
                the frame cannot be encoded or saved.
        """
        cv2 = _require_cv2()

        cap = cv2.VideoCapture(self._camera_index)
        if not cap.isOpened():
            raise AcquisitionFailure(
                f"Could not open camera {self._camera_index}. Check the connection."
            )
        try:
            for _ in range(self._warmup_frames):
                cap.read()
            ok, frame = cap.read()
        finally:
            cap.release()

        if not ok or frame is None:
            raise AcquisitionFailure(
                f"Could not read a frame from camera {self._camera_index}"
            )

        ok, encoded = cv2.imencode(
            ".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._jpeg_quality]
        )
        if not ok:
            raise AcquisitionFailure("Could not encode the camera frame as JPEG")
        data = encoded.tobytes()

        name = f"receipt_cam{self._camera_index}_{datetime.now():%Y%m%d_%H%M%S}.jpg"
        path = name
        if self._save_dir is not None:
            target = self._save_dir / name
            try:
                self._save_dir.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            except OSError as e:
                raise AcquisitionFailure(f"Could not write {target}: {e}") from e
            path = str(target)

        logger.info("Captured receipt photo %s (%d bytes)", path, len(data))
        return ReceiptImage(path=path, data=data, media_type="image/jpeg")

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available USB camera indices by probing."""
        cv2 = _require_cv2()

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
            cap.release()
        return available
