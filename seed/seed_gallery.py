#!/usr/bin/env python3
"""
Seed script to populate the gallery via the API.

Run:
    python seed/seed_gallery.py \
      --api-id <API-ID> \
      --limit 4
"""

import argparse
import io
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
from PIL import Image
import requests

logger = Logger(service="seed")


GALLERY_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/gallery"

SAMPLE_COLORS = (
    ("Harbour at dawn", (232, 142, 74)),
    ("Paddy fields", (92, 168, 80)),
    ("Monsoon sky", (70, 96, 160)),
    ("Temple steps", (200, 180, 140)),
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed gallery items via the API")

    parser.add_argument(
        "--api-id",
        default=None,
        help="API Gateway ID (LocalStack)",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Full gallery endpoint URL, overrides --api-id",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=len(SAMPLE_COLORS),
        help="Number of items to seed",
    )

    args = parser.parse_args()
    if not args.url and not args.api_id:
        parser.error("one of --api-id or --url is required")

    return args


def render_sample(color: tuple[int, int, int]) -> bytes:
    image = Image.new("RGB", (640, 480), color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def seed_gallery() -> None:
    try:
        args = parse_args()
        gallery_url = args.url or GALLERY_API_URL.format(args.api_id)

        logger.info("Starting seeding process", extra={"api_base_url": gallery_url})

        for index, (title, color) in enumerate(SAMPLE_COLORS[: args.limit]):
            response = requests.post(
                gallery_url,
                data={"title": title, "description": f"Sample image {index + 1}"},
                files={"image": (f"sample-{index + 1}.png", render_sample(color), "image/png")},
                timeout=30,
            )

            response_json = cast(dict[str, Any], response.json())

            if response.status_code == 201:
                logger.info(
                    "Seeded gallery item",
                    extra={"title": title, "record_id": response_json.get("id")},
                )
            else:
                logger.error(
                    "Failed to seed gallery item",
                    extra={
                        "title": title,
                        "status": response.status_code,
                        "response": response_json,
                    },
                )

        logger.info("Seeding completed")

        list_response = requests.get(gallery_url, timeout=30)
        logger.info(
            "List gallery response",
            extra={
                "status": list_response.status_code,
                "count": list_response.json().get("count") if list_response.ok else None,
            },
        )

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_gallery()
