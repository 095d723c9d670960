from dataclasses import dataclass
from typing import List, Tuple


class RegionIndexError(IndexError):
    pass


@dataclass(frozen=True)
class Region:
    """
    One deployment of the archival service. The index is persisted in the
    properties file, so entries are only ever appended.
    """

    index: int
    name: str
    title: str

    @property
    def code(self) -> str:
        return self.name.lower().replace("_", "-")

    @property
    def glacier_endpoint(self) -> str:
        return f"https://glacier.{self.code}.amazonaws.com"

    @property
    def sqs_endpoint(self) -> str:
        return f"https://sqs.{self.code}.amazonaws.com"

    @property
    def sns_endpoint(self) -> str:
        return f"https://sns.{self.code}.amazonaws.com"


REGIONS: Tuple[Region, ...] = (
    Region(0, "US_EAST_1", "US East (Northern Virginia)"),
    Region(1, "US_WEST_2", "US West (Oregon)"),
    Region(2, "US_WEST_1", "US West (Northern California)"),
    Region(3, "EU_WEST_1", "EU (Ireland)"),
    Region(4, "AP_NORTHEAST_1", "Asia Pacific (Tokyo)"),
    Region(5, "AP_SOUTHEAST_2", "Asia Pacific (Sydney)"),
    Region(6, "EU_CENTRAL_1", "EU (Frankfurt)"),
    Region(7, "AP_SOUTHEAST_1", "Asia Pacific (Singapore)"),
    Region(8, "AP_NORTHEAST_2", "Asia Pacific (Seoul)"),
    Region(9, "AP_SOUTH_1", "Asia Pacific (Mumbai)"),
)


def by_index(index: int) -> Region:
    """
    Returns the region at the given (persisted) index.
    """
    if not 0 <= index < len(REGIONS):
        raise RegionIndexError(
            "Region index %s out of range (0-%s)" % (index, len(REGIONS) - 1)
        )
    return REGIONS[index]


def title_by_index(index: int) -> str:
    return by_index(index).title


def titles() -> List[str]:
    """
    Display titles in index order, for pick lists.
    """
    return [region.title for region in REGIONS]
