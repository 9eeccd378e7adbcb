"""Raw EXIF tag identifiers and the candidate lists used to resolve fields.

Each logical attribute is resolved from an ordered list of tags; the first
one present in the metadata wins.
"""

from dataclasses import dataclass

from PIL.ExifTags import GPS, Base

# Directory names used by MetadataContainer
IMAGE = "image"
EXIF = "exif"
GPS_INFO = "gps"
INTEROP = "interop"


@dataclass(frozen=True)
class Tag:
    """Identifier of a raw tag inside a metadata directory.

    Attributes:
        directory: Directory the tag lives in (IFD0, Exif, GPS or Interop)
        code: Numeric tag code
        name: Tag name, for logging
    """
    directory: str
    code: int
    name: str

    def __str__(self) -> str:
        return f"{self.directory}:{self.name}"


def _tag(directory: str, member) -> Tag:
    return Tag(directory, int(member), member.name)


# IFD0
IMAGE_DESCRIPTION = _tag(IMAGE, Base.ImageDescription)
MAKE = _tag(IMAGE, Base.Make)
MODEL = _tag(IMAGE, Base.Model)
DATE_TIME = _tag(IMAGE, Base.DateTime)

# Exif IFD
EXPOSURE_TIME = _tag(EXIF, Base.ExposureTime)
F_NUMBER = _tag(EXIF, Base.FNumber)
PHOTOGRAPHIC_SENSITIVITY = _tag(EXIF, Base.ISOSpeedRatings)
ISO_SPEED = _tag(EXIF, Base.ISOSpeed)
ISO_SPEED_LATITUDE_YYY = _tag(EXIF, Base.ISOSpeedLatitudeyyy)
ISO_SPEED_LATITUDE_ZZZ = _tag(EXIF, Base.ISOSpeedLatitudezzz)
DATE_TIME_ORIGINAL = _tag(EXIF, Base.DateTimeOriginal)
DATE_TIME_DIGITIZED = _tag(EXIF, Base.DateTimeDigitized)
SHUTTER_SPEED_VALUE = _tag(EXIF, Base.ShutterSpeedValue)
APERTURE_VALUE = _tag(EXIF, Base.ApertureValue)
FOCAL_LENGTH = _tag(EXIF, Base.FocalLength)
FOCAL_LENGTH_35MM = _tag(EXIF, Base.FocalLengthIn35mmFilm)
LENS_SPECIFICATION = _tag(EXIF, Base.LensSpecification)
LENS_MODEL = _tag(EXIF, Base.LensModel)

# GPS IFD
GPS_LATITUDE_REF = _tag(GPS_INFO, GPS.GPSLatitudeRef)
GPS_LATITUDE = _tag(GPS_INFO, GPS.GPSLatitude)
GPS_LONGITUDE_REF = _tag(GPS_INFO, GPS.GPSLongitudeRef)
GPS_LONGITUDE = _tag(GPS_INFO, GPS.GPSLongitude)
GPS_AREA_INFORMATION = _tag(GPS_INFO, GPS.GPSAreaInformation)

# Candidate lists, in priority order
TITLE_TAGS = (IMAGE_DESCRIPTION,)
ISO_TAGS = (
    PHOTOGRAPHIC_SENSITIVITY,
    ISO_SPEED,
    ISO_SPEED_LATITUDE_YYY,
    ISO_SPEED_LATITUDE_ZZZ,
)
DATETIME_TAGS = (DATE_TIME_ORIGINAL, DATE_TIME_DIGITIZED, DATE_TIME)
AREA_TAGS = (GPS_AREA_INFORMATION,)
