#!/usr/bin/env python3
"""
Example: search PubMed, then pull summaries and abstracts for the hits.

Fires several requests back to back; the shared rate limiter keeps the
client under NCBI's 3 requests/second limit.

Usage:
    ENTREZ_EMAIL=your.email@example.com python fetch_summaries.py
"""

import logging
from entrez_client.client import EntrezClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)


def main():
    with EntrezClient(raise_for_status=True) as client:
        response = client.search(
            "pubmed",
            {"Title": "ocean microbiome", "PDAT": "2023"},
            {"retmode": "json", "retmax": 5},
        )
        ids = response.json()["esearchresult"].get("idlist", [])
        if not ids:
            print("No results.")
            return

        # Lists are comma-joined on the wire: id=1,2,3
        summaries = client.summary("pubmed", {"id": ids, "retmode": "json"}).json()
        for uid in ids:
            doc = summaries["result"][uid]
            print(f"{uid}: {doc.get('title', '')}")

        # One request per record to show the limiter sleeping
        for uid in ids:
            abstract = client.fetch("pubmed", {"id": uid, "rettype": "abstract", "retmode": "text"})
            print(f"\n--- {uid} ({len(abstract.text)} bytes) ---")
            print(abstract.text[:300])


if __name__ == "__main__":
    main()
