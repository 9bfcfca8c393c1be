"""Static suggestion catalogs.

Lists are ordered by popularity: the head of each list is what users
see when they have not typed anything yet.
"""

from __future__ import annotations

from typing import Dict, Tuple

COMMON_CUISINES: Tuple[str, ...] = (
    "Italian",
    "Mexican",
    "Chinese",
    "Japanese",
    "Indian",
    "Thai",
    "French",
    "Greek",
    "Mediterranean",
    "American",
    "Korean",
    "Vietnamese",
    "Spanish",
    "Turkish",
    "Lebanese",
    "Moroccan",
    "Ethiopian",
    "Brazilian",
    "Peruvian",
    "British",
    "German",
    "Russian",
    "Caribbean",
    "Middle Eastern",
    "African",
)

COMMON_CHEFS: Tuple[str, ...] = (
    "Gordon Ramsay",
    "Julia Child",
    "Anthony Bourdain",
    "Jamie Oliver",
    "Wolfgang Puck",
    "Emeril Lagasse",
    "Nigella Lawson",
    "Thomas Keller",
    "Alice Waters",
    "Massimo Bottura",
    "Yotam Ottolenghi",
    "José Andrés",
    "Ferran Adrià",
    "Alain Ducasse",
    "Joël Robuchon",
    "Paul Bocuse",
    "Heston Blumenthal",
    "Marco Pierre White",
    "Bobby Flay",
    "Ina Garten",
    "Rachael Ray",
    "Mario Batali",
    "Daniel Boulud",
    "Eric Ripert",
    "Nobu Matsuhisa",
    "David Chang",
    "Dominique Crenn",
    "René Redzepi",
    "Grant Achatz",
    "Marcus Samuelsson",
    "Giada De Laurentiis",
    "Madhur Jaffrey",
)

COMMON_DISHES: Tuple[str, ...] = (
    "Spaghetti Carbonara",
    "Chicken Tikka Masala",
    "Pad Thai",
    "Beef Wellington",
    "Caesar Salad",
    "Margherita Pizza",
    "Sushi",
    "Ramen",
    "Tacos al Pastor",
    "Paella",
    "Ratatouille",
    "Crème Brûlée",
    "Coq au Vin",
    "Bœuf Bourguignon",
    "Lasagna",
    "Risotto",
    "Pho",
    "Bibimbap",
    "Moussaka",
    "Falafel",
    "Hummus",
    "Shakshuka",
    "Butter Chicken",
    "Fish and Chips",
    "Guacamole",
    "Tiramisu",
    "Gazpacho",
    "Quiche Lorraine",
    "Peking Duck",
    "Jambalaya",
)

COMMON_INGREDIENTS: Tuple[str, ...] = (
    "Garlic",
    "Onion",
    "Tomato",
    "Olive Oil",
    "Butter",
    "Salt",
    "Black Pepper",
    "Chicken",
    "Beef",
    "Eggs",
    "Rice",
    "Pasta",
    "Potato",
    "Carrot",
    "Basil",
    "Parsley",
    "Cilantro",
    "Lemon",
    "Ginger",
    "Soy Sauce",
    "Parmesan",
    "Mozzarella",
    "Jalapeño",
    "Cumin",
    "Paprika",
    "Mushroom",
    "Spinach",
    "Bell Pepper",
    "Coconut Milk",
    "Crème Fraîche",
)

COMMON_RESTAURANTS: Tuple[str, ...] = (
    "The French Laundry",
    "Eleven Madison Park",
    "Noma",
    "Le Bernardin",
    "Osteria Francescana",
    "El Celler de Can Roca",
    "Per Se",
    "Alinea",
    "Mirazur",
    "Central",
    "Gaggan",
    "Steirereck",
    "Arpège",
    "Pujol",
    "Den",
)

CATALOGS: Dict[str, Tuple[str, ...]] = {
    "chef": COMMON_CHEFS,
    "dish": COMMON_DISHES,
    "ingredient": COMMON_INGREDIENTS,
    "cuisine": COMMON_CUISINES,
    "restaurant": COMMON_RESTAURANTS,
}
