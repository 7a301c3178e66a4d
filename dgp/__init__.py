"""Digital DGP: five-stage daily grammar practice."""
