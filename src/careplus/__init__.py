"""
CarePlus Queue: daily first-come-first-served patient queues for clinics

Patients join a clinic's queue for the day and see their token, the people
ahead of them and an estimated wait; the clinic's doctor moves entries through
consultation.
"""

__version__ = "0.1.0"
__author__ = "CarePlus Team"
__description__ = "Clinic patient queue service"
