#!/usr/bin/env python
"""Send one chat message and print the reply.

Usage:
    python -m scripts.chat "What is a vector database?" --temperature 0.2

Reads OPENAI_API_KEY (and the other OPENAI_* settings) from the
environment or a .env file.
"""

import argparse
import asyncio
import sys

from vecbridge.config import get_settings
from vecbridge.exceptions import VecBridgeError
from vecbridge.llm.client import OpenAIClient
from vecbridge.llm.models import CompletionRequest, Message, Role
from vecbridge.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


async def run_chat(
    prompt: str,
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> bool:
    """Send the prompt and print the reply.

    Args:
        prompt: User message.
        model: Model override.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.

    Returns:
        True if a reply was printed, False on error.
    """
    setup_logging()
    settings = get_settings().openai

    message = Message(role=Role.USER, content=prompt)
    print(f"Prompt tokens (approx.): {message.token_count()}")

    request = CompletionRequest(
        model=model or settings.model,
        messages=[message],
        temperature=temperature,
        max_tokens=max_tokens,
    )

    try:
        client = OpenAIClient(settings=settings)
    except VecBridgeError as e:
        logger.error(e.message)
        return False

    try:
        response = await client.complete(request)
    except VecBridgeError as e:
        logger.error(f"Chat request failed: {e.message}", extra={"code": e.code.value})
        return False
    finally:
        await client.close()

    print(response.content)
    print(
        f"\n[{response.model}] prompt={response.usage.prompt_tokens} "
        f"completion={response.usage.completion_tokens} total={response.usage.total_tokens}"
    )
    return True


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Send one chat message",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("prompt", help="Message to send")
    parser.add_argument("--model", default=None, help="Model override")
    parser.add_argument("--temperature", type=float, default=None, help="Sampling temperature (0-2)")
    parser.add_argument("--max-tokens", type=int, default=None, help="Completion token cap")

    args = parser.parse_args()

    ok = asyncio.run(
        run_chat(
            prompt=args.prompt,
            model=args.model,
            temperature=args.temperature,
            max_tokens=args.max_tokens,
        )
    )

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
