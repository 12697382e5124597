# BookDesk library backend package
