import argparse
import asyncio
import json
import os
import sys
from datetime import datetime, timezone

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from read_tools_server.db import AsyncSessionLocal, ContentItem, ItemField, create_all_tables


def parse_modified(raw):
    if raw is None:
        return datetime.now(timezone.utc)
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    return datetime.fromisoformat(raw)


def build_item(record):
    item = ContentItem(
        title=record.get("title", ""),
        status=record.get("status", "publish"),
        body=record.get("body", ""),
        modified_at=parse_modified(record.get("modified")),
    )
    if record.get("id") is not None:
        item.id = int(record["id"])

    fields = record.get("fields") or {}
    for key, value in fields.items():
        # Structured builder data is stored serialized, as the CMS does.
        if not isinstance(value, str) and value is not None:
            value = json.dumps(value)
        item.fields.append(ItemField(key=key, value=value))
    return item


async def main(path):
    print("Creating tables...")
    await create_all_tables()

    with open(path, encoding="utf-8") as fh:
        records = json.load(fh)
    print(f"Found {len(records)} items in {path}.")

    async with AsyncSessionLocal() as session:
        for i, record in enumerate(records):
            item = build_item(record)
            print(f"Importing ({i+1}/{len(records)}): {item.title or item.id}")
            await session.merge(item)
        await session.commit()

    print("Done! Items imported.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import content items from a JSON file.")
    parser.add_argument("path", help="JSON list of {id, title, status, body, modified, fields}")
    args = parser.parse_args()
    asyncio.run(main(args.path))
