import pytest

from glacierup.regions import REGIONS, RegionIndexError, by_index, title_by_index, titles


def test_by_index_covers_every_region():
    regions = [by_index(i) for i in range(len(REGIONS))]
    assert [r.index for r in regions] == list(range(len(REGIONS)))
    assert len({r.title for r in regions}) == len(REGIONS)
    assert len({r.glacier_endpoint for r in regions}) == len(REGIONS)
    assert len({r.sqs_endpoint for r in regions}) == len(REGIONS)
    assert len({r.sns_endpoint for r in regions}) == len(REGIONS)


def test_persisted_indices_are_stable():
    assert by_index(0).glacier_endpoint == "https://glacier.us-east-1.amazonaws.com"
    assert by_index(1).name == "US_WEST_2"
    assert by_index(3).sqs_endpoint == "https://sqs.eu-west-1.amazonaws.com"
    assert title_by_index(4) == "Asia Pacific (Tokyo)"


@pytest.mark.parametrize("index", [-1, len(REGIONS), 99])
def test_out_of_range_raises(index):
    with pytest.raises(RegionIndexError):
        by_index(index)


def test_out_of_range_is_an_index_error():
    with pytest.raises(IndexError):
        by_index(len(REGIONS))


def test_titles_in_order():
    assert titles() == [r.title for r in REGIONS]
    assert titles()[0] == "US East (Northern Virginia)"
