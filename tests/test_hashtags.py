from thethought.social.hashtags import extract_hashtags, is_hashtag_token
from thethought.core.text import escape_like


def test_extract_keeps_order_and_duplicates_lowercased():
    assert extract_hashtags("hello #Foo #foo #BAR") == ["foo", "foo", "bar"]


def test_extract_empty_and_none():
    assert extract_hashtags("") == []
    assert extract_hashtags(None) == []
    assert extract_hashtags("no tags here") == []


def test_extract_stops_at_punctuation():
    assert extract_hashtags("#one,#two! #three_3-x") == ["one", "two", "three_3"]


def test_hashtag_token():
    assert is_hashtag_token("python_3")
    assert not is_hashtag_token("two words")
    assert not is_hashtag_token("")


def test_escape_like():
    assert escape_like("100%_off") == "100\\%\\_off"
