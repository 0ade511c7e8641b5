#!/usr/bin/env python3
"""
Basic example: search the genome project database with field-tagged terms.

Usage:
    ENTREZ_EMAIL=your.email@example.com python basic_search.py
"""

import logging
from entrez_client.client import EntrezClient

# Enable logging to see rate limiting in action
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def main():
    # Contact email is read from ENTREZ_EMAIL
    with EntrezClient() as client:
        print("Searching genomeprj for 'hapmap' projects in progress...\n")

        response = client.search(
            "genomeprj",
            {"WORD": "hapmap", "SEQS": "inprogress"},
            {"retmode": "json", "retmax": 10},
        )
        response.raise_for_status()

        result = response.json()["esearchresult"]
        print(f"Total projects found: {result['count']}")
        print(f"Query translation: {result.get('querytranslation', 'N/A')}\n")

        for i, uid in enumerate(result.get("idlist", []), 1):
            print(f"  {i}. UID: {uid}")


if __name__ == "__main__":
    main()
