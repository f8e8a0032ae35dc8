"""Forward-only, re-runnable data migrations.

Each module is a complete pass over one table:

- add_top_cluster_ids     → classify every triple into its top tag clusters
- add_misc_cluster        → give unclassified triples the "Misc" fallback cluster
- add_document_full_text  → copy each document's source file into full_text
"""
