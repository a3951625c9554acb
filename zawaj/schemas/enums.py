from enum import Enum

class Role(str, Enum):
    male = "male"
    female = "female"
    mother = "mother"

class MotherFor(str, Enum):
    son = "son"
    daughter = "daughter"

class SwipeDirection(str, Enum):
    left = "left"
    right = "right"

class ChildrenStance(str, Enum):
    yes = "yes"
    no = "no"
    maybe = "maybe"

class PrayerFrequency(str, Enum):
    always = "always"
    often = "often"
    sometimes = "sometimes"
    rarely = "rarely"
