"""Example usage of the condition builder and query executor against a local MongoDB."""

import asyncio
from typing import Optional

from pydantic import BaseModel
from pymongo import ASCENDING, IndexModel

from mongo_scoop import Client, Model, Scoop, or_where, where
from mongo_scoop.models import ListOption
from settings import MongoSettings


class GroceryItem(BaseModel):
    """Example document stored in the grocery_items collection."""

    name: str
    category: str
    quantity: int
    price: float
    note: Optional[str] = None

    @classmethod
    def indexes(cls):
        return [IndexModel([("name", ASCENDING)], unique=True)]


async def main():
    """Run example operations."""
    client = await Client.setup(MongoSettings(database="scoop_example"))

    try:
        await client.auto_migrate(GroceryItem)
        items = Model(client, GroceryItem)

        # 1. Inserts
        print("\n=== Inserts ===")
        await items.new_scoop().delete()
        ids = await items.new_scoop().batch_create(
            GroceryItem(name="Milk", category="dairy", quantity=2, price=1.2),
            GroceryItem(name="Cheddar", category="dairy", quantity=1, price=4.5),
            GroceryItem(name="Apples", category="fruit", quantity=6, price=0.4),
            GroceryItem(name="Bread", category="bakery", quantity=1, price=2.1, note="wholegrain"),
        )
        print(f"Inserted {len(ids)} items")

        # 2. Conditions
        print("\n=== Conditions ===")
        cheap = where("price <", 2).or_where({"category": "bakery", "quantity >=": 1})
        print(f"Filter: {cheap}")

        scoop = items.new_scoop().where(cheap).sort("price")
        for item in await scoop.find():
            print(f"  {item.name}: {item.price}")

        # 3. Guards: a False guard disables the query without a round trip
        print("\n=== Guards ===")
        category = ""
        filtered = items.new_scoop().where(bool(category)).equal("category", category)
        print(f"Skipped: {filtered.filter.skip}, count: {await filtered.count()}")
        print(f"Items with 'e' in the name: {await items.new_scoop().like('name', 'e').count()}")

        # 4. Pagination
        print("\n=== Pagination ===")
        page, page_items = await items.new_scoop().sort("name").find_by_page(ListOption(limit=2, show_total=True))
        print(f"Page {page.offset}-{page.offset + len(page_items)} of {page.total}")

        # 5. Updates
        print("\n=== Updates ===")
        modified = await items.new_scoop().equal("category", "dairy").update({"$inc": {"quantity": 1}})
        print(f"Updated {modified} dairy items")

        # 6. Aggregation
        print("\n=== Aggregation ===")
        totals = await (
            items.new_scoop()
            .aggregate()
            .match(or_where({"category": "dairy", "price >": 2}))
            .group({"_id": "$category", "total": {"$sum": {"$multiply": ["$price", "$quantity"]}}})
            .sort({"total": -1})
            .execute()
        )
        for total in totals:
            print(f"  {total['_id']}: {total['total']:.2f}")

        # 7. Transactions (requires a replica set)
        print("\n=== Transactions ===")
        tx: Scoop = await client.new_scoop().begin()
        try:
            await client.new_scoop(tx, model=GroceryItem).equal("name", "Apples").delete()
        except Exception:
            await tx.rollback()
            raise
        # commit ends the session whether or not it succeeds
        await tx.commit()

    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
