"""
Basic usage example against a running ledger gateway.

Signs up and logs in a user, then evaluates and submits transactions under
that user's identity by sending the x-user header.
"""

import logging
import os

import requests

GATEWAY_URL = os.getenv("GATEWAY_URL", "http://127.0.0.1:3004")


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    credentials = {"username": "alice", "password": "alicepw"}

    response = requests.post(f"{GATEWAY_URL}/signup", json=credentials, timeout=30)
    logger.info("Signup: %s %s", response.status_code, response.text)

    response = requests.post(f"{GATEWAY_URL}/login", json=credentials, timeout=30)
    response.raise_for_status()
    logger.info("Logged in as %s", credentials["username"])

    headers = {"x-user": credentials["username"]}
    response = requests.get(f"{GATEWAY_URL}/ping", headers=headers, timeout=10)
    logger.info("Ping: %s", response.text)

    response = requests.post(
        f"{GATEWAY_URL}/evaluate",
        json={"fcn": "ClientAccountBalance", "args": []},
        headers=headers,
        timeout=10,
    )
    logger.info("Balance: %s %s", response.status_code, response.text)

    # Submit waits for commit, so allow for the commit-status deadline
    response = requests.post(
        f"{GATEWAY_URL}/submit",
        json={"fcn": "Mint", "args": ["100"]},
        headers=headers,
        timeout=90,
    )
    logger.info("Mint: %s %s", response.status_code, response.text)


if __name__ == "__main__":
    main()
