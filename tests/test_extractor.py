# -*- coding: utf-8 -*-
import pytest

from fb_media_parser.core.parser.extractor import (
    EXTRACTION_RULES,
    clean_url,
    extract_video_urls,
    is_valid_video_url,
    quality_rank,
    refine_quality,
)

from .conftest import HD_URL, SD_URL, escaped


def _rule(name):
    return next(rule for rule in EXTRACTION_RULES if rule.name == name)


def test_hd_ranked_above_sd():
    markup = (
        '{"sd_src":"https://video.xx.fbcdn.net/v/y.mp4",'
        '"hd_src":"https://video.xx.fbcdn.net/v/x.mp4"}'
    )
    candidates = extract_video_urls(markup)

    assert [c.source_url for c in candidates] == [
        "https://video.xx.fbcdn.net/v/x.mp4",
        "https://video.xx.fbcdn.net/v/y.mp4",
    ]
    assert candidates[0].quality == "HD (1080p)"
    assert candidates[0].approximate_size == "~50MB"
    assert candidates[1].quality == "SD (480p)"
    assert candidates[1].approximate_size == "~25MB"
    assert all(c.format == "MP4" for c in candidates)


@pytest.mark.parametrize("key, quality", [
    ("hd_src", "HD (1080p)"),
    ("hd_src_no_ratelimit", "HD (1080p)"),
    ("browser_native_hd_url", "HD (720p)"),
    ("sd_src", "SD (480p)"),
    ("sd_src_no_ratelimit", "SD (480p)"),
    ("browser_native_sd_url", "SD (360p)"),
    ("playable_url", "Standard"),
    ("playable_url_quality_hd", "HD (720p)"),
    ("video_url", "Standard"),
    ("src", "Mobile (360p)"),
    ("dash_manifest", "Standard"),
    ("progressive_url", "Standard"),
])
def test_each_rule_on_its_own(key, quality):
    url = "https://video.xx.fbcdn.net/v/t42/clip.mp4?_nc_cat=1&oh=00"
    candidates = extract_video_urls(f'"{key}":"{escaped(url)}"')

    assert len(candidates) == 1
    assert candidates[0].source_url == url
    assert candidates[0].quality == quality


def test_src_rule_requires_mp4_in_value():
    markup = '"src":"https://video.xx.fbcdn.net/v/video_stream?type=video"'
    assert extract_video_urls(markup) == []


def test_url_hints_refine_default_quality():
    assert refine_quality(_rule('playable_url'), "https://x.fbcdn.net/hd/v.mp4") == "HD (720p)"
    assert refine_quality(_rule('video_url'), "https://x.fbcdn.net/sd/v.mp4") == "SD (480p)"
    assert refine_quality(_rule('browser_native_sd_url'), "https://x.fbcdn.net/hd/v.mp4") == "HD (720p)"
    # 已经是高清档位的不会被降级
    assert refine_quality(_rule('hd_src'), "https://x.fbcdn.net/hd/v.mp4") == "HD (1080p)"
    assert refine_quality(_rule('sd_src'), "https://x.fbcdn.net/sd/v.mp4") == "SD (480p)"
    assert refine_quality(_rule('browser_native_sd_url'), "https://x.fbcdn.net/sd/v.mp4") == "SD (480p)"
    assert refine_quality(_rule('hd_src'), "https://x.fbcdn.net/sd/v.mp4") == "HD (1080p)"


def test_escape_sequences_are_cleaned():
    raw = "https:\\/\\/video.xx.fbcdn.net\\/v\\/a.mp4?x=1\\u0026y=2\\u00253D"
    assert clean_url(raw) == "https://video.xx.fbcdn.net/v/a.mp4?x=1&y=2="


def test_percent_decoding_failure_keeps_cleaned_url():
    malformed = "https://video.xx.fbcdn.net/v/a.mp4?x=100%"
    assert clean_url(malformed) == malformed
    invalid_utf8 = "https://video.xx.fbcdn.net/v/a.mp4?x=%ff"
    assert clean_url(invalid_utf8) == invalid_utf8


@pytest.mark.parametrize("url", [
    "",
    "short",
    "ftp://video.xx.fbcdn.net/v/a.mp4",
    "https://example.com/v/a.mp4",
    "https://scontent.xx.fbcdn.net/v/photo.jpg",
    "/v/relative/video.xx.fbcdn.net/a.mp4",
])
def test_invalid_urls_are_rejected(url):
    assert not is_valid_video_url(url)


@pytest.mark.parametrize("url", [
    "https://video.xx.fbcdn.net/v/a.mp4",
    "https://scontent-iad3-1.xx.fbcdn.net/v/stream?type=video",
    "http://video.fxx1-1.fna.fbcdn.net/o1/video/abc",
])
def test_valid_urls_are_accepted(url):
    assert is_valid_video_url(url)


def test_invalid_candidates_are_dropped_silently():
    markup = (
        '"hd_src":"https://evil.example.com/x.mp4",'
        '"sd_src":"not a url",'
        f'"playable_url":"{escaped(SD_URL)}"'
    )
    candidates = extract_video_urls(markup)
    assert [c.source_url for c in candidates] == [SD_URL]


def test_duplicates_collapse_to_first_discovery():
    markup = (
        f'"hd_src":"{escaped(HD_URL)}",'
        f'"playable_url":"{escaped(HD_URL)}",'
        f'"sd_src":"{escaped(HD_URL)}"'
    )
    candidates = extract_video_urls(markup)
    assert len(candidates) == 1
    assert candidates[0].quality == "HD (1080p)"


def test_escaped_and_plain_forms_of_same_url_are_deduplicated():
    markup = f'"sd_src":"{escaped(SD_URL)}","video_url":"{SD_URL}"'
    assert [c.source_url for c in extract_video_urls(markup)] == [SD_URL]


def test_video_object_literal():
    url = "https://video.xx.fbcdn.net/v/t42/object.mp4?oh=1"
    markup = '{"video_id":"123","video_url":"' + escaped(url) + '","other":1}'
    candidates = extract_video_urls(markup)

    # video_url 规则先于对象字面量规则命中，同一链接只保留一个
    assert len(candidates) == 1
    assert candidates[0].source_url == url
    assert candidates[0].quality == "Standard"
    assert candidates[0].approximate_size == "~30MB"

    only_object = extract_video_urls(markup, rules=[])
    assert [c.source_url for c in only_object] == [url]
    assert only_object[0].quality == "Standard"


def test_ranking_is_stable_within_tier():
    first = "https://video.xx.fbcdn.net/v/one.mp4"
    second = "https://video.xx.fbcdn.net/v/two.mp4"
    mobile = "https://video.xx.fbcdn.net/v/three.mp4"
    markup = (
        f'"playable_url":"{first}","video_url":"{second}",'
        f'"src":"{mobile}","hd_src":"{HD_URL}"'
    )
    candidates = extract_video_urls(markup)
    assert [c.source_url for c in candidates] == [HD_URL, mobile, first, second]
    assert [quality_rank(c.quality) for c in candidates] == [3, 1, 0, 0]


def test_extraction_is_deterministic():
    markup = (
        f'"sd_src":"{escaped(SD_URL)}","hd_src":"{escaped(HD_URL)}",'
        f'"src":"https://video.xx.fbcdn.net/v/m.mp4"'
    )
    assert extract_video_urls(markup) == extract_video_urls(markup)


def test_no_duplicates_and_all_valid_on_mixed_markup():
    urls = [HD_URL, SD_URL, "https://video.xx.fbcdn.net/v/a.mp4", "https://bad.example/v.mp4"]
    markup = ",".join(
        f'"{rule.name}":"{escaped(url)}"'
        for rule in EXTRACTION_RULES
        for url in urls
        if rule.name != 'src' or url.endswith('.mp4')
    )
    candidates = extract_video_urls(markup)
    sources = [c.source_url for c in candidates]

    assert len(sources) == len(set(sources))
    assert all(is_valid_video_url(url) for url in sources)
    assert set(sources) == set(urls[:3])


def test_empty_markup():
    assert extract_video_urls("") == []
    assert extract_video_urls("<html>no video here</html>") == []
