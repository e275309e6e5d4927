# -*- coding: utf-8 -*-
import asyncio
import logging
from typing import List

import aiohttp

from .core.config_manager import ConfigManager
from .core.constants import Config
from .core.exceptions import VideoParserError
from .core.models import ResolutionResult
from .core.parser import FacebookParser, PageFetcher
from .utils import format_parse_error

logger = logging.getLogger(__name__)


def print_result(result: ResolutionResult, url: str):
    """打印解析结果"""
    print("\n" + "=" * 80)
    print(f"链接: {url}")
    print("-" * 80)

    if not result.success:
        print(f"❌ 解析失败: {result.error}")
        print("=" * 80)
        return

    print(f"标题: {result.title}")
    print(f"封面: {result.thumbnail_url or 'N/A'}")
    print(f"时长: {result.duration_label}")
    print(f"解析方式: {result.strategy}")

    print(f"\n直链: {len(result.candidates)} 个")
    for idx, candidate in enumerate(result.candidates, 1):
        url_text = candidate.source_url
        print(
            f"  [{idx}] {candidate.quality} {candidate.format} {candidate.approximate_size} "
            f"{url_text[:80]}{'...' if len(url_text) > 80 else ''}"
        )
    print("=" * 80)


async def resolve_text(text: str, parser: FacebookParser) -> List[ResolutionResult]:
    """
    解析文本中的所有 Facebook 链接并打印结果

    Args:
        text: 输入文本
        parser: Facebook 解析器

    Returns:
        解析结果列表
    """
    links = parser.extract_links(text)
    if not links:
        print("未找到可解析的 Facebook 链接")
        return []

    print(f"找到 {len(links)} 个链接\n")
    results = []
    for link in links:
        try:
            result = await parser.parse(link)
        except VideoParserError as e:
            print(format_parse_error(link, e))
            continue
        print_result(result, link)
        results.append(result)

    success_count = sum(1 for r in results if r.success)
    print("\n" + "=" * 80)
    print("统计汇总")
    print("-" * 80)
    print(f"  成功: {success_count} 个")
    print(f"  失败: {len(links) - success_count} 个")
    print(f"  总计: {len(links)} 个")
    print("=" * 80)
    return results


async def main(config_manager: ConfigManager):
    """
    主函数，运行交互式解析工具

    Args:
        config_manager: 配置管理器
    """
    print("=" * 80)
    print("Facebook 视频链接解析工具")
    print("输入 'q' 退出程序")
    print("=" * 80)

    connector = aiohttp.TCPConnector(
        limit=Config.CONNECTOR_LIMIT,
        limit_per_host=Config.CONNECTOR_LIMIT_PER_HOST,
        ttl_dns_cache=300,
        enable_cleanup_closed=True
    )
    async with aiohttp.ClientSession(connector=connector) as session:
        parser = FacebookParser(PageFetcher(session, config_manager), config_manager)
        while True:
            try:
                print("\n请输入包含 Facebook 链接的文本（输入空行结束，输入 q 退出）:")
                lines = []
                while True:
                    line = input(">>> " if not lines else "... ").strip()
                    if line.lower() == 'q':
                        print("再见！")
                        return
                    if not line:
                        if lines:
                            break
                        continue
                    lines.append(line)

                await resolve_text('\n'.join(lines), parser)
            except (KeyboardInterrupt, EOFError):
                print("\n\n程序已中断")
                return


def cli():
    config_manager = ConfigManager.from_env()
    logging.basicConfig(
        level=logging.DEBUG if config_manager.debug_mode else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if config_manager.debug_mode:
        logger.debug("Debug模式已启用")
    asyncio.run(main(config_manager))


if __name__ == "__main__":
    cli()
