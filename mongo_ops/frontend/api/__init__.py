""" API route modules. Importing a module records its routes in the route table. """
