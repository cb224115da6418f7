"""
AutoApply - profile autofill and job-posting extraction for arbitrary web pages.

Drives a page through a document backend (Playwright for live pages,
BeautifulSoup for saved HTML) and:
1. Matches form fields to profile keys and fills them
2. Highlights filled fields and shows toast feedback in the page
3. Extracts a normalized job record from job-board pages
"""

__version__ = "1.0.0"
