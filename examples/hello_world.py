"""
principal_store — Hello World

Every principal owns one record and any number of data entries.
Writes merge, and reads of anything never written fail loudly.
"""

import asyncio

from principal_store import DataKeyNotFoundError, NamespacedStore, PrincipalNotFoundError
from principal_store.sanitizers import chain, drop_empty, drop_fields


async def main():
    # ──────────────────────────────────────
    #  1. Create the store (in-memory backend by default)
    # ──────────────────────────────────────
    store = NamespacedStore(
        sanitizer=chain(drop_fields("context.prev.0.response"), drop_empty("data")),
    )

    # ──────────────────────────────────────
    #  2. Bind a session to a principal
    # ──────────────────────────────────────
    ann = store.bind("u1")

    # ──────────────────────────────────────
    #  3. Records merge field by field
    # ──────────────────────────────────────
    await ann.save_record({"name": "Ann", "data": {}})
    await ann.save_record({"age": 30})
    print("record:", await ann.load_record())

    # ──────────────────────────────────────
    #  4. Data entries are independent values
    # ──────────────────────────────────────
    await ann.save_entry("score", 10)
    await ann.save_entry("score", 20)
    print("score:", await ann.load_entry("score"))

    await ann.delete_entry("score")
    try:
        await ann.load_entry("score")
    except DataKeyNotFoundError as e:
        print("after delete:", e)

    # ──────────────────────────────────────
    #  5. Fire-and-forget writes, confirmed later
    # ──────────────────────────────────────
    ann.submit(ann.save_entry("level", 3))
    await ann.drain()
    print("level:", await ann.load_entry("level"))

    # ──────────────────────────────────────
    #  6. Deleting a principal removes everything under it
    # ──────────────────────────────────────
    await ann.delete_record()
    try:
        await ann.load_record()
    except PrincipalNotFoundError as e:
        print("after delete:", e)


if __name__ == "__main__":
    asyncio.run(main())
