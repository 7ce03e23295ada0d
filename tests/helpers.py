import json

import requests

AIRPORTS_DAT = "\n".join(
    [
        r'3797,"John F Kennedy International Airport","New York","United States","JFK","KJFK",40.6398,-73.7789,13,-5,"A","America/New_York","airport","OurAirports"',
        r'3484,"Los Angeles International Airport","Los Angeles","United States","LAX","KLAX",33.9425,-118.408,125,-8,"A","America/Los_Angeles","airport","OurAirports"',
        r'5,"Nadzab Airport","Nadzab","Papua New Guinea",\N,"AYNZ",-6.569803,146.725977,239,10,"U","Pacific/Port_Moresby","airport","OurAirports"',
        r'9001,"Field, North","Smalltown","Canada","","CXYZ",50.0,-100.0,800,-6,"A","America/Winnipeg","airport","OurAirports"',
        "",
    ]
)

ROUTES_DAT = "\n".join(
    [
        "AA,24,JFK,3797,LAX,3484,,0,738",
        "AA,24,LAX,3484,JFK,3797,,0,738 320",
        "AB1,123,JFK,3797,LAX,3484,,0,320",
        r"BA,1355,JFK,3797,XXX,\N,,0,744 777",
        r"ZZ,999,QQQ,\N,JFK,3797,,0,",
        r"ZZ,999,WWW,\N,LAX,3484,,0,CR2",
        "",
    ]
)

EXTRA_AIRPORTS_CSV = "\n".join(
    [
        "IATA3,Name,City,Country,Elevation,Latitude,Longitude",
        "QQQ,Quiet Strip,Quietville,Nowhere,10,1.0,2.0",
        "JFK,Shadow Kennedy,Elsewhere,Nowhere,0,0.0,0.0",
    ]
)

EXTRA_ROUTES_CSV = "\n".join(
    [
        "ID,StartingAirport,DestinationAirport,Airline,Distance,Equipment1,Equipment2,Equipment3,Equipment4,Equipment5,Equipment6,Equipment7,Equipment8,Equipment9",
        "QQQLAXSA,QQQ,LAX,SA,384400,ROC,,,,,,,,",
    ]
)


def search_response(*airports):
    return json.dumps({"status": 1, "airports": list(airports)})


XXX_AIRPORT = {
    "apid": "12345",
    "iata": "XXX",
    "icao": "",
    "name": "Xavier Field",
    "city": "Xtown",
    "country": "Nowhere",
    "elevation": "100",
    "x": "10.5",
    "y": "20.25",
}


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Stands in for requests.Session; answers airport searches from a dict keyed by IATA code."""

    def __init__(self, lookups=None, files=None, events=None):
        self.lookups = lookups or {}
        self.files = files or {}
        self.events = events if events is not None else []
        self.posted = []
        self.fetched = []

    def post(self, url, data=None, timeout=None):
        code = data["iata"]
        self.posted.append(code)
        self.events.append(("post", code))
        outcome = self.lookups.get(code, FakeResponse(search_response()))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get(self, url, timeout=None):
        self.fetched.append(url)
        outcome = self.files[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self, events=None):
        self.calls = []
        self.events = events if events is not None else []

    def __call__(self, seconds):
        self.calls.append(seconds)
        self.events.append(("sleep", seconds))
