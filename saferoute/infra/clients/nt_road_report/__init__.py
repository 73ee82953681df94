"""
NT Road Report client

Northern Territory road obstruction feed.
"""
from .incidents import NTRoadReportClient, parse_feed, parse_incident

__all__ = ["NTRoadReportClient", "parse_feed", "parse_incident"]
