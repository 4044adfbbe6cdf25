"""EnrollMe: WebReg enrollment automation.

This package drives a browser through UCSD WebReg to search for course
sections by their section ID and enroll in them as soon as they open up.
"""
