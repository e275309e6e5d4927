# -*- coding: utf-8 -*-
from fb_media_parser.core.parser import FacebookParser
from fb_media_parser.run_local import resolve_text

from .conftest import FakeFetcher, HD_URL, video_page


async def test_resolve_text_prints_each_link(capsys):
    fetcher = FakeFetcher({
        "www.facebook.com/watch/?v=1": video_page(("hd_src", HD_URL)),
        "explode": RuntimeError("boom"),
    })
    parser = FacebookParser(fetcher)

    results = await resolve_text(
        "first https://www.facebook.com/watch/?v=1 then https://fb.watch/explode/",
        parser
    )

    output = capsys.readouterr().out
    assert len(results) == 1
    assert results[0].success
    assert "标题: Cat video" in output
    assert "HD (1080p) MP4 ~50MB" in output
    assert "解析失败：boom" in output
    assert "成功: 1 个" in output
    assert "失败: 1 个" in output


async def test_resolve_text_without_links(capsys):
    results = await resolve_text("nothing here", FacebookParser(FakeFetcher()))

    assert results == []
    assert "未找到可解析的 Facebook 链接" in capsys.readouterr().out
