#!/usr/bin/env python3
import unittest
import sys
import os

def run_tests():
    """Run all test cases against an in-memory database"""
    # Add project root and tests to path
    root = os.path.abspath(os.path.dirname(__file__))
    start_dir = os.path.join(root, 'tests')
    sys.path.insert(0, root)
    sys.path.insert(0, start_dir)
    os.environ.setdefault("DATABASE_URL", "sqlite://")
    os.environ.setdefault("DEBUG", "false")

    # Discover and run tests
    loader = unittest.TestLoader()
    suite = loader.discover(start_dir, pattern='test_*.py', top_level_dir=start_dir)

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()

if __name__ == '__main__':
    success = run_tests()
    sys.exit(0 if success else 1)
