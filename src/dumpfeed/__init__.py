"""Wiki export ingestion: dump files and harvested batches as page streams."""
