#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render cable labels to a print-ready PDF.
"""

# local repo modules
import cable_label_layout.cli


if __name__ == "__main__":
	cable_label_layout.cli.main()
