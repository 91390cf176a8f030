# /scripts/find_generic.py
from __future__ import annotations
import argparse, asyncio, json, logging, sys

DEFAULT_QUERY = "Doctor prescribed Lipitor 20mg for cholesterol. What's the generic?"

def print_step(title):
    print("\n" + "━" * 50)
    print(title)
    print("━" * 50)

def pretty(o, indent=2):
    return json.dumps(o, indent=indent, ensure_ascii=False)

async def run_local(query: str):
    from genmed.container import get_agent_orchestrator
    return await get_agent_orchestrator().handle(query)

def run_remote(base: str, query: str):
    from clients.genmed_client import GenericFinderClient
    out = GenericFinderClient(base).search(query)
    if "error" in out and not out.get("success"):
        print(out["error"]); sys.exit(1)
    return out.get("result")

def main(argv=None):
    ap = argparse.ArgumentParser(description="Find a cheaper generic medicine (Indian market)")
    ap.add_argument("query", nargs="*", help="medicine name or question")
    ap.add_argument("--api", default=None, help="call a running server instead, e.g. http://localhost:3000")
    args = ap.parse_args(argv)

    query = " ".join(args.query).strip() or DEFAULT_QUERY

    from dotenv import load_dotenv
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    print_step(f"🏥 Generic Medicine Finder\nQuery: {query}")
    result = run_remote(args.api, query) if args.api else asyncio.run(run_local(query))
    print_step("📋 RECOMMENDATION:")
    print(pretty(result))

if __name__ == "__main__":
    main()
