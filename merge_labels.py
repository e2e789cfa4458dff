#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Merge CSV or TSV address data into printable label sheet PDFs.
"""

# local repo modules
import address_label_merger.cli


if __name__ == "__main__":
	address_label_merger.cli.main()
