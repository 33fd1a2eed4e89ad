import argparse
import asyncio
import logging

from bggxml import BGGClient, BGGException, EntityMode

# Configure logging
log = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


async def show_hot_list(family_ids, api_token: str = None, verbatim: bool = False):
    """
    Prints the BGG hot list, followed by any requested game families.
    """
    entity_mode = EntityMode.VERBATIM if verbatim else EntityMode.CORRECTED

    async with BGGClient(api_token=api_token, entity_mode=entity_mode) as client:
        try:
            hot_list, families = await asyncio.gather(
                client.get_hot_list(timeout=60),
                client.get_game_families(family_ids, timeout=60),
            )
        except BGGException as e:
            log.error(f"API Error: {e}")
            return

    print("\n--- BGG Hot List ---")
    for entry in hot_list:
        print(f"{entry.rank:>2}. {entry.name} ({entry.year_published or 'N/A'}) [id {entry.id}]")

    for family in families:
        print(f"\n--- {family.name} ({len(family.games)} games) ---")
        for game in family.games:
            print(f"- {game.name} [id {game.id}]")


def main():
    parser = argparse.ArgumentParser(description="Show the BGG hot list and, optionally, some game families.")
    parser.add_argument("families", nargs="*", type=int, help="Game family IDs to list, e.g. 2 for Carcassonne.")
    parser.add_argument("--token", default=None, help="BGG API token.")
    parser.add_argument(
        "--verbatim",
        action="store_true",
        help="Show text exactly as BGG encodes it instead of repairing double-encoded characters.",
    )
    args = parser.parse_args()

    asyncio.run(show_hot_list(args.families, args.token, args.verbatim))


if __name__ == "__main__":
    main()
