"""Contribution calendar from the GitHub GraphQL API, or a saved dump of it."""

import json

import requests

GRAPHQL_URL = "https://api.github.com/graphql"

QUERY = """
query ($login: String!) {
  user(login: $login) {
    contributionsCollection {
      contributionCalendar {
        weeks {
          contributionDays {
            contributionCount
            date
            weekday
          }
        }
      }
    }
  }
}
"""


class FetchError(RuntimeError):
    pass


def extract_weeks(payload):
    """Pull ``weeks`` out of a GraphQL response (or accept a bare week list)."""
    if isinstance(payload, list):
        return payload
    if payload.get("errors"):
        raise FetchError(f"GraphQL error: {json.dumps(payload['errors'])}")
    try:
        return payload["data"]["user"]["contributionsCollection"]["contributionCalendar"]["weeks"]
    except (KeyError, TypeError) as e:
        raise FetchError(f"Unexpected GraphQL response structure: missing {e}") from e


def fetch_weeks(username, token, session=None, timeout=30):
    http = session or requests
    r = http.post(
        GRAPHQL_URL,
        json={"query": QUERY, "variables": {"login": username}},
        headers={
            "Authorization": f"Bearer {token}",
            "User-Agent": "contrib-tetris",
        },
        timeout=timeout,
    )
    r.raise_for_status()
    return extract_weeks(r.json())


def load_weeks(path):
    with open(path, encoding="utf-8") as f:
        return extract_weeks(json.load(f))
