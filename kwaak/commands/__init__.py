"""Backend commands, command events and the responders that report on them."""