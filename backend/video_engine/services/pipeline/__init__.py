"""Generation pipeline stages: segmentation, keywords, clip generation, reference frames."""
