"""
write_load.py - concurrent create script for probing the capacity guard

Fires many POST /api/link requests at once against a running server and
reports how many were created vs refused. Because the link count check and
the insert are not one transaction, a burst against a nearly full store can
end with more links than the capacity threshold; the final count from
/api/all shows by how much.

Usage:
  python write_load.py --base http://127.0.0.1:3000 --count 200 --concurrency 50 --out links_created.jsonl
"""
import argparse
import asyncio
import json
import random
import string
import time
from collections import Counter
from datetime import datetime, timezone

import httpx

def _now_iso():
    return datetime.now(timezone.utc).isoformat()

def _rand_host():
    tlds = ["com", "net", "org", "io", "ai"]
    names = ["example", "sample", "demo", "test", "alpha", "beta", "gamma"]
    return f"{random.choice(names)}.{random.choice(tlds)}"

def _rand_path(n=6):
    alphabet = string.ascii_letters + string.digits
    return "".join(random.choice(alphabet) for _ in range(n))

async def _create_one(client: httpx.AsyncClient, base: str, out_file, idx: int) -> str:
    target = f"https://{_rand_host()}/{_rand_path(8)}?q={idx}"
    try:
        r = await client.post(f"{base}/api/link", json={"target": target}, timeout=10)
    except httpx.HTTPError as e:
        return f"transport:{type(e).__name__}"
    if r.status_code == 201:
        data = r.json()
        if out_file:
            out_file.write(json.dumps({"short_code": data["short_code"], "target": target}) + "\n")
        return "created"
    try:
        return r.json()["error"]["type"]
    except (ValueError, KeyError):
        return f"http:{r.status_code}"

async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:3000")
    parser.add_argument("--count", type=int, default=200)
    parser.add_argument("--concurrency", type=int, default=50)
    parser.add_argument("--out", default="links_created.jsonl")
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()
    outcomes = Counter()

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    with open(args.out, "w", encoding="utf-8") as out_f:
        async with httpx.AsyncClient(limits=limit) as client:
            sem = asyncio.Semaphore(args.concurrency)

            async def _task(i):
                async with sem:
                    outcomes[await _create_one(client, args.base, out_f, i)] += 1

            await asyncio.gather(*(_task(i) for i in range(args.count)))

            stored = await client.get(f"{args.base}/api/all", timeout=10)
            stored_count = len(stored.json()) if stored.status_code == 200 else None

    dt = time.perf_counter() - t0
    print(f"START:  {start_iso}")
    print(f"END:    {_now_iso()}")
    print(f"TOTAL:  {dt:.3f} s")
    for outcome, n in sorted(outcomes.items()):
        print(f"  {outcome:<16} {n}")
    print(f"STORED: {stored_count}")
    if dt > 0:
        print(f"TPS:    {outcomes['created']/dt:.1f} req/s")

if __name__ == "__main__":
    asyncio.run(main())
