#!/usr/bin/env python3
"""
Create the DynamoDB tables backing the gallery and the project collections.

Run:
    python seed/create_tables.py \
      --endpoint-url http://localhost:4566 \
      --gallery-table gallery
"""

import argparse
import os
import sys

from aws_lambda_powertools import Logger
import boto3
from botocore.exceptions import ClientError

logger = Logger(service="seed")

PROJECT_TABLES = ("CESP", "CP", "LED", "IN")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create gallery and project tables")

    parser.add_argument(
        "--endpoint-url",
        default=os.getenv("AWS_ENDPOINT_URL"),
        help="DynamoDB endpoint (e.g. LocalStack); AWS when omitted",
    )
    parser.add_argument(
        "--region",
        default=os.getenv("AWS_REGION", "us-east-1"),
        help="AWS region",
    )
    parser.add_argument(
        "--gallery-table",
        default=os.getenv("GALLERY_TABLE_NAME", "gallery"),
        help="Gallery table name",
    )
    parser.add_argument(
        "--project-prefix",
        default=os.getenv("PROJECT_TABLE_PREFIX", ""),
        help="Prefix prepended to each project table name",
    )

    return parser.parse_args()


def create_table(client, table_name: str) -> None:
    try:
        client.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as exc:
        if exc.response["Error"]["Code"] != "ResourceInUseException":
            raise
        logger.info("Table already exists", extra={"table": table_name})
        return

    client.get_waiter("table_exists").wait(TableName=table_name)
    logger.info("Created table", extra={"table": table_name})


def create_tables() -> None:
    try:
        args = parse_args()

        client = boto3.client(
            "dynamodb",
            endpoint_url=args.endpoint_url,
            region_name=args.region,
        )

        table_names = [args.gallery_table]
        table_names.extend(f"{args.project_prefix}{name}" for name in PROJECT_TABLES)

        logger.info("Creating tables", extra={"tables": table_names})

        for table_name in table_names:
            create_table(client, table_name)

    except Exception as exc:
        logger.exception("Table creation failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    create_tables()
