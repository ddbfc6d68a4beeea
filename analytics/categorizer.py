"""Bucket parsed transactions into habit ("vice") categories by keyword."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from models import CategoryMatch, ParsedTransaction, TransactionSummary

# Case-insensitive substring match (no word boundaries), so concatenated
# merchant codes like "SQ *BLUEBOTTLECOFFEE" still hit.
VICE_KEYWORDS: dict[str, list[str]] = {
    "smoking": [
        "tobacco", "cigarette", "cigarettes", "vape", "vaping", "juul",
        "marlboro", "camel", "newport", "smoke shop", "smokeshop",
        "cigar", "e-cig", "nicotine", "puff bar", "blu cigs",
    ],
    "alcohol": [
        "liquor", "bar", "pub", "brewery", "wine", "beer", "spirits",
        "total wine", "bevmo", "spec's", "abc store", "tavern", "saloon",
        "nightclub", "club", "lounge", "cocktail", "whiskey", "vodka",
    ],
    "gambling": [
        "casino", "draftkings", "fanduel", "bet365", "betmgm", "poker",
        "lottery", "lotto", "slots", "wager", "sportsbook", "bovada",
        "gambling", "bet ", "betting", "stake", "pokerstars",
    ],
    "coffee": [
        "starbucks", "dunkin", "coffee", "cafe", "espresso", "latte",
        "peets", "dutch bros", "caribou", "tim horton", "blue bottle",
        "philz", "intelligentsia", "counter culture", "roasters",
    ],
    "fastFood": [
        "mcdonald", "burger king", "wendy", "taco bell", "chick-fil-a",
        "kfc", "popeyes", "arby", "sonic", "jack in the box", "subway",
        "chipotle", "five guys", "in-n-out", "whataburger", "carl's jr",
        "hardee", "panda express", "del taco", "white castle",
    ],
    "cannabis": [
        "dispensary", "cannabis", "marijuana", "weed", "pot shop",
        "420", "leafly", "weedmaps", "greenleaf", "herbal", "medmen",
    ],
    "shopping": [
        "amazon", "target", "walmart", "costco", "best buy", "macys",
        "nordstrom", "sephora", "ulta", "apple store", "nike", "adidas",
        "zara", "h&m", "forever 21", "urban outfitters",
    ],
    "subscriptions": [
        "netflix", "spotify", "hulu", "disney+", "hbo max", "paramount",
        "apple tv", "youtube premium", "amazon prime", "audible", "crunchyroll",
        "peacock", "espn", "showtime", "discovery+",
    ],
    "delivery": [
        "doordash", "uber eats", "grubhub", "postmates", "instacart",
        "seamless", "caviar", "delivery.com", "favor", "gopuff",
    ],
}


def matches_keywords(description: str, keywords: Iterable[str]) -> bool:
    desc = description.lower()
    return any(kw.lower() in desc for kw in keywords if kw)


def categorize(
    transactions: Iterable[ParsedTransaction],
    taxonomy: Mapping[str, Iterable[str]] = VICE_KEYWORDS,
) -> dict[str, list[ParsedTransaction]]:
    """Map every category to the transactions it matches.

    A transaction can land in several categories.
    """
    txns = list(transactions)
    return {
        category: [t for t in txns if matches_keywords(t.description, keywords)]
        for category, keywords in taxonomy.items()
    }


def categorize_transactions(
    transactions: Iterable[ParsedTransaction],
    category: str,
    taxonomy: Mapping[str, Iterable[str]] = VICE_KEYWORDS,
) -> list[ParsedTransaction]:
    """Transactions matching a single category; unknown categories match nothing."""
    lookup = {name.lower(): kws for name, kws in taxonomy.items()}
    keywords = list(lookup.get(str(category).lower(), []))
    if not keywords:
        return []
    return [t for t in transactions if matches_keywords(t.description, keywords)]


def rank(
    transactions: Iterable[ParsedTransaction],
    taxonomy: Mapping[str, Iterable[str]] = VICE_KEYWORDS,
) -> list[CategoryMatch]:
    """Per-category match count and spend, highest spend first. Empty categories are omitted."""
    results = []
    for category, matched in categorize(transactions, taxonomy).items():
        if not matched:
            continue
        results.append(CategoryMatch(
            category=category,
            match_count=len(matched),
            total_amount=sum(t.amount for t in matched),
        ))
    return sorted(results, key=lambda m: m.total_amount, reverse=True)


def detect_vice_category(transactions: Iterable[ParsedTransaction]) -> list[CategoryMatch]:
    """Rank the built-in vice categories for a batch of transactions."""
    return rank(transactions, VICE_KEYWORDS)


def top_vice_category(transactions: Iterable[ParsedTransaction]) -> Optional[str]:
    ranked = detect_vice_category(transactions)
    return ranked[0].category if ranked else None


def summarize_transactions(transactions: Iterable[ParsedTransaction]) -> TransactionSummary:
    """Count / total / average / min / max and date range."""
    txns = list(transactions)
    if not txns:
        return TransactionSummary()

    amounts = [t.amount for t in txns]
    dates = sorted(t.date for t in txns)
    total = sum(amounts)
    return TransactionSummary(
        count=len(txns),
        total=total,
        average=total / len(amounts),
        min=min(amounts),
        max=max(amounts),
        start_date=dates[0],
        end_date=dates[-1],
    )
