class Path:
    """URL constants for the WebReg application.

    Contains the base hostname and specific endpoint paths used for navigation.
    """

    HOSTNAME = "https://act.ucsd.edu/"
    START = f"{HOSTNAME}webreg2/start"
