from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional, Tuple, Union

SCALAR_FIELDS = (
    "subject",
    "web_link",
    "location",
    "start_datetime",
    "end_datetime",
    "formatteddatetime",
    "description",
    "event_template",
    "parentevent",
    "primaryeventtype",
    "cost",
    "eventimage",
    "age",
    "bookings",
    "venue",
    "venueaddress",
    "venuetype",
    "maximumparticipantcapacity",
    "requirements",
    "meetingpoint",
    "suburb",
    "ward",
    "waterwayaccessfacilities",
    "waterwayaccessinformation",
    "status",
    "eventtype",
    "communityhall",
    "locationifvenueunavailable",
    "image",
)

# Upstream sends these either as a single string or as a list of strings.
MULTI_VALUED_FIELDS = (
    "event_type",
    "agerange",
    "activitytype",
    "libraryeventtypes",
)

# Column order of the events table, minus the surrogate event_id.
EVENT_COLUMNS = [
    "subject",
    "web_link",
    "location",
    "start_datetime",
    "end_datetime",
    "formatteddatetime",
    "description",
    "event_template",
    "event_type",
    "parentevent",
    "primaryeventtype",
    "cost",
    "eventimage",
    "age",
    "bookings",
    "bookingsrequired",
    "agerange",
    "venue",
    "venueaddress",
    "venuetype",
    "maximumparticipantcapacity",
    "activitytype",
    "requirements",
    "meetingpoint",
    "suburb",
    "ward",
    "waterwayaccessfacilities",
    "waterwayaccessinformation",
    "status",
    "libraryeventtypes",
    "eventtype",
    "communityhall",
    "locationifvenueunavailable",
    "image",
    "externaleventid",
    "slug",
]

NaturalKey = Tuple[Optional[str], Optional[str], Optional[str]]


@dataclass(frozen=True)
class Scalar:
    value: Any

    def flatten(self) -> Optional[str]:
        return str(self.value)


@dataclass(frozen=True)
class Multi:
    values: Tuple[Any, ...]

    def flatten(self) -> Optional[str]:
        return ", ".join("" if item is None else str(item) for item in self.values)


@dataclass(frozen=True)
class _AbsentType:
    def flatten(self) -> Optional[str]:
        return None


Absent = _AbsentType()

FieldValue = Union[Scalar, Multi, _AbsentType]


def classify(value: Any) -> FieldValue:
    """Tag a loosely-typed upstream value as a scalar, a list or absent."""
    if value is None:
        return Absent
    if isinstance(value, (list, tuple)):
        return Multi(tuple(value))
    return Scalar(value)


@dataclass(frozen=True)
class StoredEvent:
    slug: str
    subject: Optional[str] = None
    web_link: Optional[str] = None
    location: Optional[str] = None
    start_datetime: Optional[str] = None
    end_datetime: Optional[str] = None
    formatteddatetime: Optional[str] = None
    description: Optional[str] = None
    event_template: Optional[str] = None
    event_type: Optional[str] = None
    parentevent: Optional[str] = None
    primaryeventtype: Optional[str] = None
    cost: Optional[str] = None
    eventimage: Optional[str] = None
    age: Optional[str] = None
    bookings: Optional[str] = None
    bookingsrequired: Optional[int] = None
    agerange: Optional[str] = None
    venue: Optional[str] = None
    venueaddress: Optional[str] = None
    venuetype: Optional[str] = None
    maximumparticipantcapacity: Optional[str] = None
    activitytype: Optional[str] = None
    requirements: Optional[str] = None
    meetingpoint: Optional[str] = None
    suburb: Optional[str] = None
    ward: Optional[str] = None
    waterwayaccessfacilities: Optional[str] = None
    waterwayaccessinformation: Optional[str] = None
    status: Optional[str] = None
    libraryeventtypes: Optional[str] = None
    eventtype: Optional[str] = None
    communityhall: Optional[str] = None
    locationifvenueunavailable: Optional[str] = None
    image: Optional[str] = None
    externaleventid: Optional[str] = None

    def __post_init__(self):
        if not self.slug:
            raise ValueError("slug is required")

    @property
    def natural_key(self) -> NaturalKey:
        return (self.subject, self.location, self.start_datetime)

    def as_row(self) -> dict:
        values = asdict(self)
        return {col: values[col] for col in EVENT_COLUMNS}
