"""
Charity events feature: listing, search, detail and recommendations.
"""
