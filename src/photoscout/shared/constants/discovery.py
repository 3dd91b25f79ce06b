"""
Discovery Constants

Patterns and endpoints used to correlate identities across networks.
"""

from __future__ import annotations

import re


class DiscoveryPatterns:
    """Regular expressions scanned in fetched content."""

    # Profile picture path on a profile page: profiles/profile_<id>_75sq_....jpg
    PROFILE_MARKER = re.compile(r"profiles/profile_(\d+)_")

    # Photo permalink posted to the secondary network
    PERMALINK = re.compile(r"https?://instagr\.am/p/[/\w-]+")


class TwitterAPI:
    """Twitter endpoints and parameters."""

    SEARCH_URL = "http://search.twitter.com/search.json"
    TIMELINE_URL = "http://api.twitter.com/1/statuses/user_timeline.json"

    SENTINEL = "instagr.am"
    SEARCH_QUERY = "from:{username} {sentinel}"
    TIMELINE_COUNT = 200

    PARAM_QUERY = "q"
    PARAM_SCREEN_NAME = "screen_name"
    PARAM_COUNT = "count"
    PARAM_TRIM_USER = "trim_user"

    KEY_RESULTS = "results"
    KEY_TEXT = "text"
    KEY_ID = "id"
