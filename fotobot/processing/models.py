"""Data models for the caption pipeline."""

from dataclasses import dataclass
from typing import Optional

from ..exif.fields import UNKNOWN_CAMERA, UNKNOWN_LENS


@dataclass(frozen=True)
class ResolvedAttributes:
    """Photo attributes ready to be rendered into a caption.

    Every field except camera and lens is optional; a missing value simply
    means the image did not record it.

    Attributes:
        title: Image description
        camera: "Make Model", or "Unknown Camera"
        lens: Lens model or specification, or "Unknown Lens"
        focal_length: Native focal length display, e.g. "50mm"
        focal_length_value: Native focal length in mm
        focal_length_35mm: 35mm-equivalent display, e.g. "75mm (35mm eq)"
        focal_length_35mm_value: 35mm-equivalent focal length in mm
        aperture: e.g. "f/1.8"
        shutter: e.g. "1/200s"
        iso: e.g. "ISO 400"
        datetime: Capture time, "YYYY-MM-DD HH:MM:SS"
        location: Place name
        country: Country name
        gps: Coordinate display string
        latitude: Signed latitude in decimal degrees
        longitude: Signed longitude in decimal degrees
    """
    title: Optional[str] = None
    camera: str = UNKNOWN_CAMERA
    lens: str = UNKNOWN_LENS
    focal_length: Optional[str] = None
    focal_length_value: Optional[float] = None
    focal_length_35mm: Optional[str] = None
    focal_length_35mm_value: Optional[float] = None
    aperture: Optional[str] = None
    shutter: Optional[str] = None
    iso: Optional[str] = None
    datetime: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    gps: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def focal_length_display(self) -> Optional[str]:
        """The single focal length shown in the caption.

        The native value is used when there is no 35mm equivalent or when
        both are within half a millimetre (a full-frame camera); otherwise
        the 35mm equivalent is preferred.
        """
        if self.focal_length_35mm_value is None:
            return self.focal_length

        if (
            self.focal_length_value is not None
            and abs(self.focal_length_value - self.focal_length_35mm_value) < 0.5
        ):
            return self.focal_length

        return self.focal_length_35mm or self.focal_length
