"""
Test package for secondary-table-controller

This package contains unit tests for the table pool, command rendering and
execution, multipath rule mirroring, the controller and the command
dispatcher. Nothing here runs the real `ip` tool or opens netlink sockets;
collaborators are replaced with recording fakes.
"""
