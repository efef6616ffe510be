from hlsproxy.core.hls import PlaylistKind, parse_playlist
from hlsproxy.core.hls.parser import parse_attributes, split_attribute_list


def test_split_attribute_list_respects_quotes():
    parts = split_attribute_list('BANDWIDTH=128000,CODECS="avc1.4d001e,mp4a.40.2"')
    assert parts == ["BANDWIDTH=128000", 'CODECS="avc1.4d001e,mp4a.40.2"']


def test_parse_attributes_keeps_encounter_order_and_raw_values():
    attrs = parse_attributes(
        'RESOLUTION=1280x720,BANDWIDTH=128000,CODECS="avc1.4d001e,mp4a.40.2",JUNK'
    )
    assert list(attrs.items()) == [
        ("RESOLUTION", "1280x720"),
        ("BANDWIDTH", "128000"),
        ("CODECS", '"avc1.4d001e,mp4a.40.2"'),
    ]


def test_parse_master_playlist():
    doc = parse_playlist(
        "#EXTM3U\n"
        "#EXT-X-VERSION:3\n"
        '#EXT-X-STREAM-INF:BANDWIDTH=128000,CODECS="avc1.4d001e,mp4a.40.2"\n'
        "low.m3u8\n"
        "#EXT-X-STREAM-INF:BANDWIDTH=2560000\n"
        "high.m3u8\n"
    )

    assert doc.kind is PlaylistKind.MASTER
    assert [v.uri for v in doc.variants] == ["low.m3u8", "high.m3u8"]
    assert len(doc.variants[0].attributes) == 2
    assert doc.variants[0].attributes["CODECS"] == '"avc1.4d001e,mp4a.40.2"'
    assert doc.segments == []


def test_parse_media_playlist_scalars_and_segments():
    doc = parse_playlist(
        "#EXTM3U\n"
        "#EXT-X-MEDIA-SEQUENCE:42\n"
        "#EXT-X-TARGETDURATION:10\n"
        "#EXT-X-PLAYLIST-TYPE:EVENT\n"
        "#EXTINF:9.0,Intro\n"
        "a.ts\n"
        "#EXTINF:9.5,\n"
        "b.ts\n"
        "#EXT-X-ENDLIST\n"
    )

    assert doc.kind is PlaylistKind.MEDIA
    assert doc.media_sequence == 42
    assert doc.target_duration == 10
    assert isinstance(doc.target_duration, int)
    assert doc.playlist_type == "EVENT"
    assert doc.end_list is True
    assert [(s.uri, s.duration, s.title) for s in doc.segments] == [
        ("a.ts", 9.0, "Intro"),
        ("b.ts", 9.5, None),
    ]


def test_parse_ignores_unknown_tags_and_blank_lines():
    doc = parse_playlist(
        "#EXTM3U\n"
        "\n"
        "#EXT-X-INDEPENDENT-SEGMENTS\n"
        '#EXT-X-KEY:METHOD=AES-128,URI="key.bin"\n'
        "# a comment\n"
        "#EXTINF:4,\n"
        "  seg.ts  \n"
    )

    assert [s.uri for s in doc.segments] == ["seg.ts"]
    assert doc.segments[0].duration == 4


def test_parse_empty_playlist_is_degenerate_media():
    doc = parse_playlist("#EXTM3U\n")
    assert doc.kind is PlaylistKind.MEDIA
    assert doc.segments == []
    assert doc.variants == []


def test_parse_uri_without_extinf_becomes_segment_without_duration():
    doc = parse_playlist("#EXTM3U\nlonely.ts\n")
    assert len(doc.segments) == 1
    assert doc.segments[0].uri == "lonely.ts"
    assert doc.segments[0].duration is None


def test_parse_keeps_records_missing_their_uri():
    doc = parse_playlist("#EXTM3U\n#EXTINF:5.0,\n#EXTINF:6.0,\nb.ts\n#EXTINF:7.0,\n")
    assert [(s.uri, s.duration) for s in doc.segments] == [
        (None, 5.0),
        ("b.ts", 6.0),
        (None, 7.0),
    ]

    master = parse_playlist("#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=1\n")
    assert master.kind is PlaylistKind.MASTER
    assert master.variants[0].uri == ""


def test_parse_ignores_invalid_scalars():
    doc = parse_playlist(
        "#EXTM3U\n"
        "#EXT-X-MEDIA-SEQUENCE:abc\n"
        "#EXT-X-TARGETDURATION:-3\n"
        "#EXTINF:oops,\n"
        "a.ts\n"
    )
    assert doc.media_sequence is None
    assert doc.target_duration is None
    assert doc.segments[0].uri == "a.ts"
    assert doc.segments[0].duration is None


def test_parse_mixed_playlist_keeps_only_master_records():
    doc = parse_playlist(
        "#EXTM3U\n"
        "#EXT-X-TARGETDURATION:10\n"
        "#EXT-X-STREAM-INF:BANDWIDTH=1\n"
        "v.m3u8\n"
        "#EXTINF:4,\n"
        "s.ts\n"
        "#EXT-X-ENDLIST\n"
    )
    assert doc.kind is PlaylistKind.MASTER
    assert [v.uri for v in doc.variants] == ["v.m3u8"]
    assert doc.segments == []
    assert doc.target_duration is None
    assert doc.end_list is False


def test_parse_handles_crlf_line_endings():
    doc = parse_playlist("#EXTM3U\r\n#EXTINF:2.5,\r\na.ts\r\n")
    assert [(s.uri, s.duration) for s in doc.segments] == [("a.ts", 2.5)]
