"""
Basic ChatMarkup Example

Demonstrates colors, event groups, and placeholders.
"""

import sys
sys.path.insert(0, '..')

import chatmarkup
from chatmarkup import JsonDumpsSerializer, Parser


def show(title, runs):
    print(title)
    for run in runs:
        print(f"   {run.to_dict()}")
    print()


def main():
    print("=== ChatMarkup Basic Example ===\n")

    # Colors and formats
    show("1. Colors &aHello &l&bWorld!:", chatmarkup.parse("&aHello &l&bWorld!"))

    # Click + hover
    show(
        '2. Event group [Click!](!"/say hello" "&aRuns a command"):',
        chatmarkup.parse('[Click!](!"/say hello" "&aRuns a command")'),
    )

    # Placeholders stay literal, even when they look like markup
    show(
        "3. Placeholder with markup-like text:",
        chatmarkup.parse("Player {1} joined", ['[evil](!"/op me")']),
    )

    # Serialized hover payload
    parser = Parser(JsonDumpsSerializer(dict))
    show(
        '4. Item hover [Sword](I"{1}"):',
        parser.parse('[Sword](I"{1}")', [{"id": "diamond_sword", "Count": 1}]),
    )


if __name__ == "__main__":
    main()
