#!/usr/bin/env python3
"""
Quick Start Guide for XML Path Rules.

Registers a few path rules against a small catalog, shows the order in which
handlers fire, and prints the drive statistics.
"""

from xml_path_rules import DispatchConfig, RuleDispatcher, WhitespaceMode

CATALOG = """<?xml version="1.0"?>
<catalog>
  <book id="b1" genre="fiction">
    <title>  The   Left Hand of Darkness </title>
    <author>Ursula K. Le Guin</author>
    <price currency="USD">9.99</price>
  </book>
  <magazine id="m1"><title>Monthly</title></magazine>
  <book id="b2" genre="history">
    <title>SPQR</title>
    <author>Mary Beard</author>
    <price currency="GBP">12.50</price>
  </book>
</catalog>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - XML Path Rules")
    print("=" * 45)

    # Step 1: Register rules
    print("\n📄 Step 1: Registering rules")
    print("-" * 30)

    def on_book_open(info, context):
        print(f"  open  {info.path}[{info.position}] genre={info.get_attribute('genre')}")

    def on_book(node, context):
        price = node["price"]
        print(
            f"  close {context.path}: {node['title'].text!r} by {node['author'].text}"
            f" ({price.text} {price.get_attribute('currency')})"
        )

    def on_any_title(node, context):
        print(f"  title {node.path}: {node.text!r}")

    dispatcher = RuleDispatcher(config=DispatchConfig(default_whitespace=WhitespaceMode.NORMALIZE))
    dispatcher.register("/catalog/book", {"open_handler": on_book_open, "close_handler": on_book})
    dispatcher.register("title", on_any_title)

    for entry in dispatcher.registry.describe():
        print(f"  #{entry['rank']} {entry['pattern']}")

    # Step 2: Drive the document
    print("\n🔍 Step 2: Driving the document")
    print("-" * 30)
    result = dispatcher.drive(CATALOG)

    # Step 3: Inspect the result
    print("\n📊 Step 3: Statistics")
    print("-" * 30)
    stats = result.statistics
    print(f"  elements opened:    {stats.elements_opened}")
    print(f"  nodes created:      {stats.nodes_created}")
    print(f"  peak live nodes:    {stats.peak_live_nodes}")
    print(f"  materialized ratio: {stats.materialized_ratio:.0%}")

    # Step 4: Stop early
    print("\n🛑 Step 4: Stopping after the first book")
    print("-" * 30)
    seen = []

    def first_book_only(node, context):
        seen.append(node.get_attribute("id"))
        context.stop()

    result = RuleDispatcher({"book": first_book_only}).drive(CATALOG)
    print(f"  seen={seen} cancelled={result.cancelled}")


if __name__ == "__main__":
    quick_start_example()
