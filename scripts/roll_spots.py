"""
Roll spots from the command line, e.g. to eyeball how often strict mode
lands in water for a country, or to replay a customer's seed.

Run: python scripts/roll_spots.py --country NZ --mode publicish

Optional args:
  --seed abc          # Replay a specific user seed (random otherwise)
  --count 5           # Roll several independent spots
  --tile 10           # Tile side in meters
  --max-attempts 35   # Attempt budget in strict mode
"""

import asyncio
import argparse
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.sampler import COUNTRY_BOUNDS, default_max_attempts, sample_until_accepted


async def roll(country: str, mode: str, seed: str | None, tile: float, max_attempts: int):
    spot = await sample_until_accepted(
        country_code=country,
        mode=mode,
        tile_meters=tile,
        max_attempts=max_attempts,
        user_seed=seed,
    )
    print(f"\n{'='*50}")
    for key, value in spot.summary().items():
        print(f"  {key:<8} {value}")
    print(f"  {'attempt':<8} {spot.attempt}")
    if spot.check.error:
        print(f"  {'error':<8} {spot.check.error}")
    if spot.check.note:
        print(f"  {'note':<8} {spot.check.note}")
    return spot


async def main():
    parser = argparse.ArgumentParser(description="Roll random spots")
    parser.add_argument("--country", default="NZ", help=f"One of {', '.join(COUNTRY_BOUNDS)}")
    parser.add_argument("--mode", default="publicish", help="publicish (checked) or anywhere")
    parser.add_argument("--seed", default=None, help="User seed to replay")
    parser.add_argument("--count", type=int, default=1, help="Number of spots to roll")
    parser.add_argument("--tile", type=float, default=1, help="Tile side in meters")
    parser.add_argument("--max-attempts", type=int, default=None, help="Strict-mode attempt budget")
    args = parser.parse_args()

    if args.country not in COUNTRY_BOUNDS:
        print(f"WARNING: Unknown country {args.country}, the default box will be used")

    max_attempts = args.max_attempts or default_max_attempts(args.mode)

    print("=" * 60)
    print("SPOT ROLLER")
    print("=" * 60)
    print(f"Country: {args.country}  Mode: {args.mode}  Count: {args.count}")

    accepted = 0
    for _ in range(args.count):
        spot = await roll(args.country, args.mode, args.seed, args.tile, max_attempts)
        accepted += spot.check.accepted

    print("\n" + "=" * 60)
    print(f"ACCEPTED {accepted}/{args.count}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
