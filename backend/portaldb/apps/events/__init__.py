"""In-process event broker and cache revalidation notices."""
