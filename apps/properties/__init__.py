"""Properties app package.

This app encapsulates property listings: the property model, the listing
query (filters, sorting, pagination), image uploads and the image store
that keeps uploaded files on local disk or in an S3 bucket.
"""
