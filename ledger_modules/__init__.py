"""Business modules built on the ledger kernel: reporting and inventory valuation."""
