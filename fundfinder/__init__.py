"""FundFinder funding-lead search API."""
