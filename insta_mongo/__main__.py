import sys

from insta_mongo.cli import main

sys.exit(main())
