#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Place an uploaded logo on an engrave template and issue confirm and engrave PDFs.
"""

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.cli


if __name__ == "__main__":
	lep.cli.main()
