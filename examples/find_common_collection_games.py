import argparse
import asyncio
import logging
from typing import Callable, List

from bggxml import BGGClient, BGGException, CollectionFilters, CollectionItem

# Configure logging
log = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def get_sort_key(sort_choice: str) -> Callable[[CollectionItem], object]:
    """Returns a lambda function to use as a sort key."""
    if sort_choice == "rarity":
        return lambda item: item.stats.owned_by if item.stats and item.stats.owned_by is not None else 999999
    elif sort_choice == "rating":
        return lambda item: item.stats.average if item.stats and item.stats.average is not None else 0.0
    elif sort_choice == "year":
        return lambda item: item.year_published or 0
    else:  # Default to sorting by name
        return lambda item: item.name


async def find_common_games(user1_name: str, user2_name: str, sort_by: str, api_token: str = None):
    """
    Finds games that both users own and sorts them.
    """
    owned = CollectionFilters(own=True)

    async with BGGClient(api_token=api_token) as client:
        try:
            log.info(f"Fetching collections for '{user1_name}' and '{user2_name}'...")
            user1_collection, user2_collection = await asyncio.gather(
                client.get_collection(user1_name, owned),
                client.get_collection(user2_name, owned),
            )
        except BGGException as e:
            log.error(f"API Error: {e}")
            return

    user1_games = {item.id: item for item in user1_collection}
    user2_ids = {item.id for item in user2_collection}
    log.info(f"Found {len(user1_games)} games in '{user1_name}'s collection.")
    log.info(f"Found {len(user2_ids)} games in '{user2_name}'s collection.")

    common_games: List[CollectionItem] = [item for game_id, item in user1_games.items() if game_id in user2_ids]
    log.info(f"Found {len(common_games)} common games in both collections.")
    if not common_games:
        return

    is_reverse = sort_by in ["rating", "year"]  # Higher is better/newer
    common_games.sort(key=get_sort_key(sort_by), reverse=is_reverse)

    print(f"\n--- Common Games for {user1_name} and {user2_name} (sorted by {sort_by}) ---")
    for item in common_games:
        rating_val = item.stats.average if item.stats else None
        owners_val = item.stats.owned_by if item.stats else None
        year_val = item.year_published or "N/A"

        rating_str = f"{rating_val:.2f}" if isinstance(rating_val, float) else "N/A"
        owners_str = f"{owners_val}" if isinstance(owners_val, int) else "N/A"

        print(f"- {item.name} ({year_val}) "
              f"| Avg Rating: {rating_str} | Owned by: {owners_str}")


def main():
    parser = argparse.ArgumentParser(
        description="Find common games in two BGG users' collections.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""
Example Usage:
python examples/find_common_collection_games.py testuser octavian --sort rating

This command finds all games owned by both 'testuser' and 'octavian' and
sorts them by their average BGG rating in descending order.
"""
    )
    parser.add_argument("user1", help="The BGG username of the first user.")
    parser.add_argument("user2", help="The BGG username of the second user.")
    parser.add_argument(
        "--sort",
        choices=["name", "rating", "year", "rarity"],
        default="name",
        help="The criteria to sort the common games by. 'rarity' sorts by fewest owners. Default is 'name'.",
    )
    parser.add_argument("--token", default=None, help="BGG API token.")
    args = parser.parse_args()

    asyncio.run(find_common_games(args.user1, args.user2, args.sort, args.token))


if __name__ == "__main__":
    main()
