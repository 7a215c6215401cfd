import asyncio
import os
import re
from typing import Awaitable, Callable, List, Optional, Tuple

import discord
from dotenv import load_dotenv
from loguru import logger

from history_feed import (
    DateSeparator,
    FeedContent,
    HistoryFeed,
    TranslationAuthFailed,
    TranslationRateLimited,
    UnsupportedLanguage,
)

# Discord 메시지 최대 길이
MESSAGE_LIMIT = 2000

USAGE = "사용법: `!onthisday [페이지] [MM/DD] [언어코드]` (예: `!onthisday 2 02/14 es`)"

_MM_DD = re.compile(r"^\d{2}/\d{2}$")


def parse_command(content: str) -> Tuple[int, Optional[str], Optional[str]]:
    """`!onthisday [page] [MM/DD] [lang]` 명령어에서 페이지, 시작 날짜, 언어 코드를 추출합니다."""
    args = content.split()[1:]
    page = 1
    start_date = None
    language = None
    for arg in args:
        if arg.isdigit():
            page = int(arg)
        elif _MM_DD.match(arg):
            start_date = arg
        else:
            language = arg.lower()
    if page < 1:
        raise ValueError("page must be >= 1")
    return page, start_date, language


def format_content(content: FeedContent) -> str:
    lines = []
    header = f"📜 역사 속 오늘 - {content.page}페이지"
    if content.language:
        header += f" ({content.language})"
    lines.append(header)
    for item in content.events:
        if isinstance(item, DateSeparator):
            lines.append("")
            lines.append(f"**{item.date}**")
        else:
            lines.append(f"- {item.year}: {item.text}")
    return "\n".join(lines)


def chunk_message(text: str, limit: int = MESSAGE_LIMIT) -> List[str]:
    """줄 단위로 나누어 각 메시지가 limit 글자를 넘지 않도록 합니다."""
    chunks: List[str] = []
    current = ""
    for line in text.split("\n"):
        # 한 줄이 limit보다 길면 잘라냅니다
        if len(line) > limit:
            line = line[: limit - 3] + "..."
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


async def handle_onthisday(feed: HistoryFeed, content: str, send: Callable[[str], Awaitable]) -> None:
    """`!onthisday` 명령어를 처리하고 결과를 send로 전송합니다."""
    try:
        page, start_date, language = parse_command(content)
    except ValueError:
        await send(USAGE)
        return

    await send("역사 속 오늘을 가져오는 중입니다... 잠시만 기다려주세요.")

    loop = asyncio.get_running_loop()
    try:
        # 이벤트 조회와 번역은 블로킹 호출이므로 스레드에서 실행합니다.
        if language:
            result = await loop.run_in_executor(
                None, lambda: feed.get_translated_page(page, language, start_date=start_date)
            )
        else:
            result = await loop.run_in_executor(None, lambda: feed.get_page(page, start_date=start_date))
    except (UnsupportedLanguage, ValueError) as e:
        await send(f"{e}\n{USAGE}")
        return
    except TranslationRateLimited:
        await send("번역 서비스 요청 한도를 초과했습니다. 잠시 후 다시 시도하세요.")
        return
    except TranslationAuthFailed:
        await send("번역 서비스 인증에 실패했습니다. API 키를 확인하세요.")
        return
    except Exception:
        logger.exception("Failed to build feed page")
        await send("이벤트를 가져오는 중에 오류가 발생했습니다.")
        return

    if not result.events:
        await send("이벤트를 찾을 수 없습니다.")
        return

    for chunk in chunk_message(format_content(result)):
        await send(chunk)


def build_client(feed: HistoryFeed) -> discord.Client:
    # 메시지 내용을 읽기 위한 인텐트를 설정합니다.
    intents = discord.Intents.default()
    intents.message_content = True

    client = discord.Client(intents=intents)

    @client.event
    async def on_ready():
        logger.info("Logged in as {}", client.user)

    @client.event
    async def on_message(message):
        # 봇 자신의 메시지는 무시합니다.
        if message.author == client.user:
            return

        if message.content.startswith("!languages"):
            await message.channel.send("지원 언어: " + ", ".join(feed.supported_languages()))
            return

        if message.content.startswith("!onthisday"):
            await handle_onthisday(feed, message.content, message.channel.send)

    return client


def main() -> None:
    # .env 파일에서 환경 변수를 로드합니다.
    load_dotenv()

    # .env 파일에 DISCORD_BOT_HISTORY="YOUR_BOT_TOKEN" 형식으로 토큰을 저장해야 합니다.
    token = os.getenv("DISCORD_BOT_HISTORY")
    if not token:
        raise ValueError("DISCORD_BOT_HISTORY 환경 변수가 설정되지 않았습니다. .env 파일을 확인하세요.")

    with HistoryFeed() as feed:
        build_client(feed).run(token)


if __name__ == "__main__":
    main()
