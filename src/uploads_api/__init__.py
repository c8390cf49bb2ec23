"""Uploads API: proxy image uploads, listing and deletion to an S3 bucket."""
