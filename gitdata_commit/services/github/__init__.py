"""
GitHub Service Package

Remote commit construction through GitHub's Git data API.
"""
