"""Command line entry point: serve the API, ask one question, or smoke-test a deployment."""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

import httpx

from . import chat_service
from .schemas import AISettings, ChatRequest
from .settings import Settings


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = Settings.load()
    uvicorn.run(
        "tnh_chat.api.main:create_app",
        factory=True,
        host=args.host,
        port=args.port or settings.port,
    )
    return 0


async def _ask(req: ChatRequest, settings: Settings, stream: bool) -> None:
    if not stream:
        resp = await chat_service.handle_chat(req, settings)
        print(resp.model_dump_json(indent=2))
        return

    fragments = await chat_service.stream_chat(req, settings)
    async for fragment in fragments:
        sys.stdout.write(fragment)
        sys.stdout.flush()
    sys.stdout.write("\n")


def ask(args: argparse.Namespace) -> int:
    ai_settings = None
    if args.provider:
        ai_settings = AISettings(provider=args.provider, model=args.model)

    try:
        history = json.loads(args.conversation_history) if args.conversation_history else []
    except json.JSONDecodeError:
        print(f"Warning: Invalid JSON in --conversation-history, using empty list: {args.conversation_history}")
        history = []

    req = ChatRequest(
        message=args.message,
        conversation_history=history,
        database_context=args.database_context,
        ai_settings=ai_settings,
    )
    asyncio.run(_ask(req, Settings.load(), args.stream))
    return 0


def smoke(args: argparse.Namespace) -> int:
    """Check health, chat and reindex against a running service."""
    headers = {"Authorization": f"Bearer {args.api_key}"} if args.api_key else {}
    results = {}

    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
        try:
            resp = client.get("/api/health")
            results["health"] = resp.status_code == 200
            print(f"health: {resp.status_code} {resp.text}")
        except httpx.HTTPError as e:
            results["health"] = False
            print(f"health: failed ({e})")

        try:
            resp = client.post(
                "/api/chat",
                headers=headers,
                json={
                    "message": "Hello, can you tell me about The New Humanitarian?",
                    "conversation_history": [],
                },
            )
            results["chat"] = resp.status_code == 200
            preview = resp.json().get("message", "")[:100] if results["chat"] else resp.text
            print(f"chat: {resp.status_code} {preview}")
        except httpx.HTTPError as e:
            results["chat"] = False
            print(f"chat: failed ({e})")

        try:
            resp = client.post("/api/reindex", headers=headers)
            results["reindex"] = resp.status_code == 200
            print(f"reindex: {resp.status_code} {resp.text}")
        except httpx.HTTPError as e:
            results["reindex"] = False
            print(f"reindex: failed ({e})")

    passed = sum(results.values())
    print(f"{passed}/{len(results)} checks passed")
    return 0 if passed == len(results) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tnh-chat", description="TNH chat service")
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=None, help="Defaults to PORT (8787)")
    p_serve.set_defaults(func=serve)

    p_ask = sub.add_parser("ask", help="Run one chat turn locally and print the result")
    p_ask.add_argument("--message", required=True, help="User question")
    p_ask.add_argument("--database-context", default="", help="Context text supplied by the CMS")
    p_ask.add_argument(
        "--conversation-history",
        default="",
        help="JSON list of prior turns (e.g. '[{\"role\": \"user\", \"content\": \"Hi\"}]')",
    )
    p_ask.add_argument("--provider", default=None, help="Override provider (openai or ollama)")
    p_ask.add_argument("--model", default=None, help="Override chat model")
    p_ask.add_argument("--stream", action="store_true", help="Print the reply as it streams")
    p_ask.set_defaults(func=ask)

    p_smoke = sub.add_parser("smoke", help="Smoke-test a running deployment")
    p_smoke.add_argument("--base-url", default="http://localhost:8787")
    p_smoke.add_argument("--api-key", default=None, help="SERVICE_API_KEY of the deployment")
    p_smoke.add_argument("--timeout", type=float, default=60.0)
    p_smoke.set_defaults(func=smoke)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
