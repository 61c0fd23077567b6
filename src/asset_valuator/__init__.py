"""Asset Valuator: scrape vehicle and home valuations into Lunch Money.

Modules:
- registry: Load assets.json into AssetDescriptor entries
- browser: Shared headless Chromium session
- page_fetcher: XPath extraction with screenshot-on-failure
- mileage: Vehicle mileage projection for KBB URLs
- parsing / reconciler: Price text parsing and multi-source averaging
- strategies: KBB (vehicle) and Zillow/Redfin (property) valuation
- ledger: Lunch Money balance updates
- orchestrator: Batch run over the registry
"""

__version__ = "0.1.0"
