"""
Analysis tools built on the valuation engine.

Modules:
  batch_valuation: Value a list of companies into a DataFrame
"""
