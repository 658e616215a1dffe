"""
Marketing analytics services.

Each module is a pure step of the pipeline:

- metrics_aggregator: daily records → Totals per creative/campaign
- revenue_attribution: delivered sales → revenue per creative/campaign
- performance_ranker: Totals + revenue → sorted RankingRow list, summaries
- frustration_analyzer: lost sales → per-reason breakdown
- marketing_report: runs the steps above for one snapshot and period
"""
