"""
Pipeline stage implementations for Yelp Review Insights.

Contains the modules that move records through the pipeline:
- Ingestion Agent
- Schema Normalization Agent
- Sentiment Classification Agent
- Review Analytics (aggregate queries)
"""
